# Certificate administration service (FastAPI + Firebase Admin).
