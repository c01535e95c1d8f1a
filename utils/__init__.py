from .env import env_float, env_int, load_project_dotenv  # noqa: F401
from .openai_utils import completion_text, extract_json_object, safe_chat_completion  # noqa: F401

# OPENAI_API_KEY and INVENTORY_FORECAST_* settings from the project .env
load_project_dotenv()
