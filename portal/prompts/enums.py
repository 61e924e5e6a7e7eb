from enum import StrEnum


class PromptCode(StrEnum):
    NARRATIVE_WRITER = "narrative_writer"
    DOMAIN_MODELLER_SYSTEM = "domain_modeller_system"
    DOMAIN_MODELLER_GENERATE = "domain_modeller_generate"
    DOMAIN_MODELLER_REFINE = "domain_modeller_refine"
    EVALUATOR_PLANTUML = "evaluator_plantuml"
    EVALUATOR_NARRATIVE = "evaluator_narrative"
    USECASE_MODELLER = "usecase_modeller"
    MVC_MODELLER = "mvc_modeller"
    SCENARIO_WRITER = "scenario_writer"
    CHAT_SYSTEM = "chat_system"
