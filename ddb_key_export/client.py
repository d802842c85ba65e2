import logging
from contextlib import AsyncExitStack, asynccontextmanager

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError

from .config import ConnectionProfile
from .errors import StoreConnectionError

logger = logging.getLogger(__name__)


def botocore_config() -> Config:
    # Retries and timeouts stay at the SDK defaults.
    return Config(user_agent_extra="ddb-key-export")


def create_session(profile: ConnectionProfile) -> aioboto3.Session:
    try:
        return aioboto3.Session(profile_name=profile.profile_name)
    except BotoCoreError as e:
        raise StoreConnectionError(
            f"cannot load AWS profile {profile.profile_name!r}: {e}"
        ) from e


@asynccontextmanager
async def build_client(profile: ConnectionProfile):
    """
    Yield a DynamoDB client whose credentials come from the named profile.

    Region and the other defaults are resolved by the SDK from the profile,
    the environment and the shared AWS config files. Any SDK failure while
    building the client is raised as StoreConnectionError. The client is
    closed on exit.
    """
    session = create_session(profile)
    async with AsyncExitStack() as stack:
        try:
            client = await stack.enter_async_context(
                session.client("dynamodb", config=botocore_config())
            )
        except BotoCoreError as e:
            raise StoreConnectionError(
                f"cannot create DynamoDB client for profile {profile.profile_name!r}: {e}"
            ) from e
        logger.info(f"DynamoDB client ready (profile={profile.profile_name})")
        yield client
