"""
Example survey builder.

Builds a small bilingual (en/es) customer feedback survey that exercises
every question type, two sections, show and hide rules and theme
settings. Used by the demo script and the tests.
"""
from surveyc.model import (
    CheckboxGroupQuestion,
    DateQuestion,
    DropdownQuestion,
    FileUploadQuestion,
    LikertScaleQuestion,
    LocalizedText,
    LogicRule,
    MatrixQuestion,
    MultipleChoiceQuestion,
    NumericQuestion,
    OpenTextQuestion,
    Option,
    PlainText,
    RankingQuestion,
    RuleAction,
    RuleCondition,
    SectionBreak,
    Settings,
    Survey,
)


def _t(en: str, es: str) -> LocalizedText:
    return LocalizedText({"en": en, "es": es})


def build_example_survey() -> Survey:
    settings = Settings(
        default_language="en",
        languages=["en", "es"],
        primary_color="#2f9e44",
        show_response_summary=True,
        completion_message=_t("Thanks for your feedback!", "¡Gracias por sus comentarios!"),
    )

    questions = [
        SectionBreak(id="about", text=_t("About you", "Sobre usted")),
        MultipleChoiceQuestion(
            id="customer",
            text=_t("Have you bought from us before?", "¿Nos ha comprado antes?"),
            required=True,
            options=[Option("yes", _t("Yes", "Sí")), Option("no", PlainText("No"))],
            logic=[
                LogicRule("satisfaction", RuleAction.SHOW, RuleCondition.EQUALS, "yes"),
                LogicRule("channels", RuleAction.SHOW, RuleCondition.EQUALS, "yes"),
                LogicRule("referral", RuleAction.HIDE, RuleCondition.EQUALS, "yes"),
            ],
        ),
        NumericQuestion(
            id="age",
            text=_t("How old are you?", "¿Cuántos años tiene?"),
            min=18,
            max=120,
            unit=_t("years", "años"),
        ),
        DropdownQuestion(
            id="country",
            text=_t("Where do you live?", "¿Dónde vive?"),
            placeholder=_t("Select a country", "Seleccione un país"),
            options=[
                Option("es", _t("Spain", "España")),
                Option("mx", _t("Mexico", "México")),
                Option("us", _t("United States", "Estados Unidos")),
            ],
        ),
        DateQuestion(
            id="last_purchase",
            text=_t("When did you last shop with us?", "¿Cuándo compró por última vez?"),
            max_date="2030-12-31",
        ),
        SectionBreak(id="experience", text=_t("Your experience", "Su experiencia")),
        LikertScaleQuestion(
            id="satisfaction",
            text=_t("How satisfied are you?", "¿Qué tan satisfecho está?"),
            required=True,
            scale=5,
            start_label=_t("Not at all", "Nada"),
            end_label=_t("Very", "Mucho"),
            logic=[LogicRule("complaint", RuleAction.SHOW, RuleCondition.LESS_THAN, 3)],
        ),
        OpenTextQuestion(
            id="complaint",
            text=_t("What went wrong?", "¿Qué salió mal?"),
            multiline=True,
            max_length=1000,
        ),
        CheckboxGroupQuestion(
            id="channels",
            text=_t("Where do you shop?", "¿Dónde compra?"),
            allow_other=True,
            max_selections=2,
            options=[
                Option("store", _t("In store", "En tienda")),
                Option("web", PlainText("Web")),
                Option("app", PlainText("App")),
            ],
            logic=[LogicRule("app_rating", RuleAction.SHOW, RuleCondition.CONTAINS, "app")],
        ),
        MatrixQuestion(
            id="app_rating",
            text=_t("Rate our app", "Califique nuestra app"),
            rows=[Option("speed", _t("Speed", "Velocidad")), Option("design", _t("Design", "Diseño"))],
            columns=[
                Option("bad", _t("Bad", "Malo")),
                Option("ok", PlainText("OK")),
                Option("good", _t("Good", "Bueno")),
            ],
        ),
        RankingQuestion(
            id="priorities",
            text=_t("Rank what matters most", "Ordene lo más importante"),
            options=[
                Option("price", _t("Price", "Precio")),
                Option("quality", _t("Quality", "Calidad")),
                Option("service", _t("Service", "Servicio")),
            ],
        ),
        OpenTextQuestion(
            id="referral",
            text=_t("How did you hear about us?", "¿Cómo nos conoció?"),
        ),
        FileUploadQuestion(
            id="receipt",
            text=_t("Attach a receipt (optional)", "Adjunte un recibo (opcional)"),
            allowed_types=[".pdf", "image/*"],
            max_files=2,
            max_file_size=5 * 1024 * 1024,
        ),
    ]

    return Survey(
        id="customer-feedback",
        title=_t("Customer Feedback", "Opinión de clientes"),
        description=_t("Help us improve our service.", "Ayúdenos a mejorar nuestro servicio."),
        settings=settings,
        questions=questions,
    )
