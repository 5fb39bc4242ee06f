import os

ALGORITHM = "HS256"

# IMPORTANT: Set a strong secret in production. Must match the account service that issues tokens.
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
