from fastapi import APIRouter

from book_recommender.api import books, libraries, ratings, recommendations, users

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(libraries.router, tags=["libraries"])
router.include_router(books.router, prefix="/books", tags=["books"])
router.include_router(recommendations.router, prefix="/recommendations", tags=["recommendations"])
router.include_router(ratings.router, prefix="/ratings", tags=["ratings"])
