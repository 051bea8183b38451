# run.py

import uvicorn

from pitch2angels.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "pitch2angels.main:app",
        host=settings.HOST,   # 0.0.0.0 accepts connections from any IP
        port=settings.PORT,
        reload=False
    )
