import uvicorn

from bizhub.config import settings

if __name__ == "__main__":
    uvicorn.run("bizhub.app:app", host="0.0.0.0", port=8000, reload=settings.debug)
