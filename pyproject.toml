[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wstools"
version = "0.1.0"
description = "WebSocket command-line tools: file sender, relay server and Redis channel subscriber"
requires-python = ">=3.10"
keywords = ["websocket", "msgpack", "redis", "file-transfer", "relay", "cli"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet",
    "Topic :: Utilities",
]
dependencies = [
    "websockets>=13.0",
    "msgpack",
    "redis",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
ws-send = "wstools.send:main"
ws-transfer = "wstools.transfer:main"
ws-redis-subscribe = "wstools.redis_subscribe:main"

[tool.hatch.build.targets.wheel]
packages = ["wstools"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
