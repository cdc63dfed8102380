import uvicorn
import os
import sys

# Add current directory to path so imports work
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from app.core.config import settings

if __name__ == "__main__":
    # Production launcher: no reload, trust X-Forwarded-* from the platform proxy
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=False,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )
