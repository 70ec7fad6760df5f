"""
JWT Auth Server - Entrypoint

Starts the service:
- Loads settings from the environment / .env
- Configures structured JSON logging
- Connects to MongoDB (exits with code 1 if the first connection fails)
- Serves /api/health and /api/auth/* with uvicorn until SIGINT

Run with ``python main.py`` or ``python -m auth_service``.
"""

from auth_service.server import main

if __name__ == "__main__":
    main()
