# initialize_loops.py - create the custom contact properties the service relies on
import asyncio
from dotenv import load_dotenv

load_dotenv()

from mailer.config import settings
from mailer.loops.client import LoopsClient
from mailer.loops.service import ContactDirectory

async def initialize_loops():
    directory = ContactDirectory(
        LoopsClient(settings.loops_so_secret, base_url=settings.loops_api_url, timeout=settings.loops_timeout)
    )
    await directory.initialize_custom_properties()
    print("✅ Loops custom properties are in place")

if __name__ == "__main__":
    asyncio.run(initialize_loops())
