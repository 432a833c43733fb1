import os
from dotenv import load_dotenv

load_dotenv()

ENV = os.getenv("ENV", "dev")
CRON_SECRET = os.getenv("CRON_SECRET")
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
EMAIL_RELAY_URL = os.getenv("EMAIL_RELAY_URL", "http://127.0.0.1:8000/api/send-email")
SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY")
MAIL_FROM = os.getenv("MAIL_FROM", "noreply@medicationreminder.app")
MAILER_BACKEND = os.getenv("MAILER_BACKEND", "relay")
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD")
CHECK_CONFIG_PATH = os.getenv("CHECK_CONFIG_PATH", "config/check_config.yaml")
REDIS_CONFIG_PATH = os.getenv("REDIS_CONFIG_PATH", "config/redis_config.yaml")
