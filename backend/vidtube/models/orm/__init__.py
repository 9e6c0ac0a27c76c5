# vidtube/models/orm/__init__.py
from .base import Base
from .user import User
from .video import Video
from .subscription import Subscription
from .view import View
