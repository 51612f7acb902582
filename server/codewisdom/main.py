from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from codewisdom.routers import analysis

app = FastAPI(
    title="CodeWisdom Server",
    description="API for ranking source files by Legacy Code Index.",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins for local development
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analysis.router)

@app.get("/api-status")
async def root():
    return {"message": "CodeWisdom Server is running. Visit /docs for API documentation."}
