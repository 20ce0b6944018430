from fastapi import APIRouter

from .features.add_member.router import router as add_member_router
from .features.create_group.router import router as create_group_router
from .features.dashboard.router import router as dashboard_router
from .features.manage_group.router import router as manage_group_router
from .features.manage_individual.router import router as manage_individual_router
from .features.submit_rsvp.router import router as submit_rsvp_router

router = APIRouter()

router.include_router(create_group_router)
router.include_router(add_member_router)
router.include_router(manage_group_router)
router.include_router(manage_individual_router)
router.include_router(submit_rsvp_router)
router.include_router(dashboard_router)
