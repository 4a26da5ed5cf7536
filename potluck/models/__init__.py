from .user import User  # noqa: F401
from .event import Event  # noqa: F401
from .day import Day  # noqa: F401
from .meal import Meal  # noqa: F401
from .person import Person  # noqa: F401
from .item import Item  # noqa: F401
from .ingredient import Ingredient  # noqa: F401
from .change_log import ChangeLog  # noqa: F401
