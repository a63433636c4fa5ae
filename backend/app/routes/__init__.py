# Lesson catalog routes plus infrastructure endpoints (unversioned)
from . import (
    health as health,
    images as images,
    lessons as lessons,
    orders as orders,
    prometheus as prometheus,
    search as search,
)
