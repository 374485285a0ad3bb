class InternalURIs:
    API = "/api"
    START_VALIDATION = API + "/start-validation"
    GET_VALIDATION_STATUS = API + "/get-validation-status"
    VALIDATE_KEY = API + "/validate-key"
    CHECK_KEY = API + "/check-key"
    GENERATE_PROMPT = API + "/generate-prompt"
    HEALTHZ = "/healthz"


class ExternalURIs:
    OPENAI_MODELS = "/models"
    OPENAI_CHAT = "/chat/completions"
    GOOGLE_MODELS = "/models"
    GOOGLE_GENERATE = "/models/{model}:generateContent"
    GOOGLE_COUNT_TOKENS = "/models/{model}:countTokens"


# Model-list filters
OPENAI_MODEL_PREFIX = "gpt"
GOOGLE_MODEL_MARKER = "gemini"
GOOGLE_MODEL_PREFIX = "models/"
GOOGLE_GENERATE_METHOD = "generateContent"
