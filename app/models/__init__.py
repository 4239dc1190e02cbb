# Package marker
from app.models.user import User, UserRoleEntry  # noqa
from app.models.id_request import IdRequest  # noqa
from app.models.notification import Notification  # noqa
