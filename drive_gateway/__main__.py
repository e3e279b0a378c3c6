# drive_gateway/__main__.py
import os

import uvicorn


def main():
    uvicorn.run(
        "drive_gateway.main:app",
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "3000")),
        log_config=None,  # keep the JSON handlers installed by setup_logging
    )


if __name__ == "__main__":
    main()
