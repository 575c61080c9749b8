from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notemanager.api import auth, notes
from notemanager.config import configure_logging, cors_origins

configure_logging()

app = FastAPI(title="NoteManager API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(notes.router)


@app.get("/health")
def health():
    return {"ok": True}
