"""
Text utilities that cut ICONIX artifacts down to what one use case needs
before they are sent to the LLM.
"""
import logging
import re

logger = logging.getLogger(__name__)

TRUNCATED_MARKER = "\n... (truncated) ...\n"
ELLIPSIS = "..."
# room kept for the marker when the body of a diagram is cut
TRUNCATION_RESERVE = 100

_ALWAYS_KEPT_PREFIXES = ("legend", "note", "skinparam", "!")
_MVC_CONTAINER_PREFIXES = _ALWAYS_KEPT_PREFIXES + ("package", "namespace")


def _split_lines(model: str) -> list[str]:
    return model.rstrip("\n").split("\n")


def _is_start(trimmed: str) -> bool:
    return trimmed.startswith("@start")


def _is_end(trimmed: str) -> bool:
    return trimmed.startswith("@end")


def filter_use_case_model(use_case_model: str | None, alias: str | None, name: str | None) -> str | None:
    """
    Keeps the declaration of one use case, its incoming and outgoing links and the
    definitions of the actors attached to it. The full model is returned when the
    alias is unknown.
    """
    if not use_case_model or not use_case_model.strip():
        return use_case_model
    if not alias or not alias.strip():
        logger.warning("Use case alias is empty, returning full model")
        return use_case_model

    quoted_alias = re.escape(alias)
    if not re.search(rf'usecase\s+"([^"]+)"\s+as\s+{quoted_alias}', use_case_model, re.IGNORECASE | re.MULTILINE):
        logger.warning(f"Use case with alias '{alias}' not found, returning full model")
        return use_case_model

    actor_link = re.compile(rf"(\w+)\s*[-.>]+\s*{quoted_alias}", re.IGNORECASE)
    outgoing_link = re.compile(rf"{quoted_alias}\s*[-.>]+\s*(\w+)", re.IGNORECASE)

    lines = _split_lines(use_case_model)
    filtered: list[str] = []
    related_actors: list[str] = []
    found_use_case = False

    for line in lines:
        trimmed = line.strip()

        if _is_start(trimmed):
            filtered.append(line)
            continue

        if _is_end(trimmed):
            filtered.extend(related_actors)
            filtered.append(line)
            break

        if f"as {alias}" in trimmed or (name and "usecase" in trimmed and name in trimmed):
            filtered.append(line)
            found_use_case = True
            continue

        if found_use_case:
            match = actor_link.search(trimmed)
            if match:
                actor = match.group(1)
                already_defined = f"{actor} as" in "\n".join(filtered)
                if actor not in related_actors and not already_defined:
                    definition = re.compile(
                        rf'(actor|participant)\s+"([^"]+)"\s+as\s+{re.escape(actor)}', re.IGNORECASE
                    )
                    for candidate in lines:
                        if definition.search(candidate):
                            related_actors.append(candidate)
                            break
                filtered.append(line)
                continue

            if outgoing_link.search(trimmed):
                filtered.append(line)
                continue

        if trimmed.startswith(_ALWAYS_KEPT_PREFIXES) or not trimmed:
            filtered.append(line)

    result = "\n".join(filtered) + "\n"
    logger.info(f"Filtered use case model: {len(use_case_model)} -> {len(result)} chars (alias: {alias})")
    return result


def filter_mvc_model(mvc_model: str | None, alias: str | None) -> str | None:
    """Keeps the lines and brace blocks that mention the use case alias as a whole word."""
    if not mvc_model or not mvc_model.strip():
        return mvc_model
    if not alias or not alias.strip():
        logger.warning("Use case alias is empty, returning full MVC model")
        return mvc_model

    alias_pattern = re.compile(rf"\b{re.escape(alias)}\b", re.IGNORECASE)
    filtered: list[str] = []
    in_block = False
    depth = 0

    for line in _split_lines(mvc_model):
        trimmed = line.strip()

        if _is_start(trimmed):
            filtered.append(line)
            continue

        if _is_end(trimmed):
            filtered.append(line)
            break

        if alias_pattern.search(line):
            in_block = True
            filtered.append(line)
            continue

        if in_block:
            depth += line.count("{") - line.count("}")
            filtered.append(line)
            if depth <= 0 and trimmed.endswith("}"):
                in_block = False
                depth = 0
        elif trimmed.startswith(_MVC_CONTAINER_PREFIXES) or not trimmed:
            filtered.append(line)

    result = "\n".join(filtered) + "\n"
    logger.info(f"Filtered MVC model: {len(mvc_model)} -> {len(result)} chars (alias: {alias})")
    return result


def shorten_narrative(narrative: str | None, use_case_name: str | None, max_length: int = 2000) -> str | None:
    """Returns a window of max_length chars centred on the first mention of the use case."""
    if not narrative or not narrative.strip() or len(narrative) <= max_length:
        return narrative

    if use_case_name and use_case_name.strip():
        index = narrative.lower().find(use_case_name.lower())
        if index >= 0:
            start = max(0, index - max_length // 2)
            end = min(len(narrative), start + max_length)
            window = narrative[start:end]
            if start > 0:
                window = ELLIPSIS + window
            if end < len(narrative):
                window = window + ELLIPSIS
            logger.info(f"Shortened narrative: {len(narrative)} -> {len(window)} chars (use case at {index})")
            return window

    shortened = narrative[:max_length] + ELLIPSIS
    logger.info(f"Shortened narrative: {len(narrative)} -> {len(shortened)} chars (truncated)")
    return shortened


def truncate_plantuml(model: str | None, max_length: int) -> str | None:
    """Cuts the diagram body while keeping the @start/@end lines intact."""
    if not model or not model.strip() or len(model) <= max_length:
        return model

    start_index = model.find("@start")
    end_index = model.rfind("@end")
    start_line_end = model.find("\n", start_index) if start_index >= 0 else -1

    if start_index < 0 or end_index <= start_index or start_line_end < 0 or start_line_end >= end_index:
        return model[:max_length] + TRUNCATED_MARKER

    header = model[:start_index]
    start_tag = model[start_index:start_line_end + 1]
    body = model[start_line_end + 1:end_index]
    end_tag = model[end_index:]

    body_max_length = max(0, max_length - len(header) - len(start_tag) - len(end_tag) - TRUNCATION_RESERVE)
    if len(body) > body_max_length:
        body = body[:body_max_length] + TRUNCATED_MARKER

    result = header + start_tag + body + end_tag
    logger.info(f"Truncated PlantUML model: {len(model)} -> {len(result)} chars")
    return result
