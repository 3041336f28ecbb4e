"""Entry point — run with: python -m quoteboard.main"""
import uvicorn

from quoteboard.api.v1.app import create_app
from quoteboard.core.config import settings

app = create_app(settings=settings)

if __name__ == "__main__":
    uvicorn.run("quoteboard.main:app", host=settings.host, port=settings.port, reload=True)
