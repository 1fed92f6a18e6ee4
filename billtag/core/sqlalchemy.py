"""Additional data types for sqlalchemy."""
import uuid
from typing import Optional, Union

import sqlalchemy as sa
from sqlalchemy.engine.interfaces import Dialect


class UUID(sa.types.TypeDecorator):
    """UUID column, read back as :class:`uuid.UUID`.

    Native on Postgresql, 32 hex characters elsewhere. Binds accept
    :class:`uuid.UUID` values and their string forms.
    """

    impl = sa.types.Uuid
    cache_ok = True

    def process_bind_param(
        self, value: Union[None, str, uuid.UUID], dialect: Dialect
    ) -> Optional[uuid.UUID]:
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(str(value))
