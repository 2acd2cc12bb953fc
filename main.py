"""
Study Mentor Service - resource curation and study plan generation
"""
import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()

from mentor.api.app import create_app  # noqa: E402
from mentor.config.logging import configure_logging  # noqa: E402

configure_logging()

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
