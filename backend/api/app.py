from fastapi import FastAPI

from api.reports import router as reports_router

app = FastAPI(title="Competitive Intelligence Reports")
app.include_router(reports_router, prefix="/api", tags=["reports"])
