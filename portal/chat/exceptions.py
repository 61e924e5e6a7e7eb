class ChatException(Exception):
    pass


class ChatValidationException(ChatException):
    pass
