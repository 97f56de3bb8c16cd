from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
import logging
import os

load_dotenv()

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

from showcase.routes import auth, students, complaints, milestones, messages, notifications, showcase, dashboard  # noqa: E402
from showcase.services.errors import ShowcaseError  # noqa: E402

app = FastAPI(
    redirect_slashes=False,
    title="Showcase API",
    description="API for the student showcase and recruiting platform",
    version="1.0.0",
    openapi_tags=[
        {
            "name": "Showcase",
            "description": "Public directory of verified students",
        },
    ],
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[os.getenv("FRONTEND_URL", "http://localhost:5173")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(ShowcaseError)
async def showcase_error_handler(request: Request, exc: ShowcaseError):
    logger.info(f"{request.method} {request.url.path} failed: {exc.status_code} {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

# Include routers
app.include_router(auth.router, prefix="/auth")
app.include_router(students.router, prefix="/students")
app.include_router(complaints.router, prefix="/complaints")
app.include_router(milestones.router, prefix="/milestones")
app.include_router(messages.router, prefix="/messages")
app.include_router(notifications.router, prefix="/notifications")
app.include_router(showcase.router, prefix="/showcase", tags=["Showcase"])
app.include_router(dashboard.router, prefix="/dashboard")
