from fastapi import FastAPI
from contextlib import asynccontextmanager
import uvicorn
import logging

from config import APP_HOST, APP_PORT, LOG_LEVEL
from database import create_db_and_tables
from links.router import router as links_router
from account.router import router as account_router
from access_log.router import router as access_log_router
from users.router import router as users_router
from auth.auth import auth_backend, fastapi_users_app
from auth.schemas import UserRead, UserCreate, UserUpdate

logging.basicConfig(level=LOG_LEVEL)

@asynccontextmanager
async def lifespan(application: FastAPI):
    await create_db_and_tables()
    yield

app = FastAPI(title="shortlinks", lifespan=lifespan)

app.include_router(fastapi_users_app.get_auth_router(auth_backend), prefix="/auth/jwt", tags=["auth"])
app.include_router(fastapi_users_app.get_register_router(UserRead, UserCreate), prefix="/auth", tags=["auth"])
app.include_router(fastapi_users_app.get_reset_password_router(), prefix="/auth", tags=["auth"])
app.include_router(users_router)
app.include_router(fastapi_users_app.get_users_router(UserRead, UserUpdate), prefix="/users", tags=["users"])
app.include_router(links_router)
app.include_router(account_router)
app.include_router(access_log_router)

@app.get("/")
async def root():
    return {"message": "App healthy"}

if __name__ == "__main__":
    uvicorn.run("main:app", reload=False, host=APP_HOST, port=APP_PORT, log_level=LOG_LEVEL.lower())
