import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Completion endpoint (any OpenAI-compatible chat completions API)
api_base_url = os.getenv("COMPLETION_API_BASE_URL", "https://api.deepseek.com/v1")
model_name = os.getenv("COMPLETION_MODEL", "deepseek-chat")
vision_model_name = os.getenv("VISION_MODEL", model_name)

# Used only when the user has not saved an API key in their settings
deepseek_api_key = os.getenv("DEEPSEEK_API_KEY", "")

# Local key-value storage for the case file and the user settings
data_dir = os.getenv("DATA_DIR", "paralegal_data")

app_title = os.getenv("APP_TITLE", "AI Paralegal")
app_description = os.getenv("APP_DESCRIPTION", "Case notebook with an AI paralegal assistant")
host = os.getenv("HOST", "0.0.0.0")
port = int(os.getenv("PORT", "8000"))
