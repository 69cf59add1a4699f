import os
from dotenv import load_dotenv

load_dotenv()

user = os.getenv("DB_USER")
password = os.getenv("DB_PASSWORD")
host = os.getenv("DB_HOST")
port = os.getenv("DB_PORT", "5432")
db_name = os.getenv("DB_NAME")
sqlite_path = os.getenv("SQLITE_PATH")
log_level = os.getenv("LOG_LEVEL", "INFO")

if __name__ == "__main__":
    print(user, host, port, db_name, sqlite_path, log_level)
