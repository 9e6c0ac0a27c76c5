from fastapi import APIRouter

from vidtube.api.v1.endpoints.subscriptions import router as subscription_router
from vidtube.api.v1.endpoints.users import router as user_router
from vidtube.api.v1.endpoints.videos import router as video_router

routers = APIRouter()
routers.include_router(user_router, prefix="/users", tags=["Users"])
routers.include_router(video_router, prefix="/videos", tags=["Videos"])
routers.include_router(subscription_router, prefix="/subscriptions", tags=["Subscriptions"])
