"""Serve the API with uvicorn: ``python -m employee_api``."""

import uvicorn

if __name__ == "__main__":
    uvicorn.run("employee_api.main:app", host="0.0.0.0", port=8000)
