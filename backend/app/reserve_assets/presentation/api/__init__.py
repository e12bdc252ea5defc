# FastAPI routers - assets, rewards, health
from app.reserve_assets.presentation.api import assets, health, rewards

__all__ = ["assets", "health", "rewards"]
