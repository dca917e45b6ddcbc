import pytest
from sqlalchemy.exc import OperationalError

from mbbs.services.health import check_db


class _DownSession:
    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))


@pytest.mark.asyncio
@pytest.mark.unit
async def test_check_db(db_session):
    assert await check_db(db_session) is True
    assert await check_db(_DownSession()) is False
