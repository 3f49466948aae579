[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "practice-kit"
version = "0.1.0"
description = "Small web services and command-line tools: DNS mail checks, a timed quiz, a proof-of-work chain, weather lookups, scrapers, JWT services, a user store and a URL shortener."
requires-python = ">=3.10"
keywords = [
    "flask",
    "jwt",
    "proof-of-work",
    "url-shortener",
    "sitemap",
    "scraper",
    "dns",
    "spf",
    "dmarc",
    "quiz",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Internet :: Name Service (DNS)",
    "Topic :: Utilities",
]
dependencies = [
    "dnspython>=2.3",
    "requests>=2.28",
    "beautifulsoup4>=4.11",
    "flask>=2.2",
    "pyjwt>=2.6",
    "redis>=4.5",
    "pymongo>=4.3",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[project.scripts]
practice-mailcheck = "practice_kit.mailcheck:main"
practice-quiz = "practice_kit.quiz:main"
practice-pow-chain = "practice_kit.pow_chain:main"
practice-weather = "practice_kit.weather:main"
practice-google-scraper = "practice_kit.google_scraper:main"
practice-sitemap-crawler = "practice_kit.sitemap_crawler:main"
practice-jwt-creator = "practice_kit.jwt_creator:main"
practice-jwt-api = "practice_kit.jwt_api:main"
practice-users-service = "practice_kit.users_service:main"
practice-shortener = "practice_kit.shortener:main"

[tool.hatch.build.targets.wheel]
packages = ["practice_kit"]

[tool.hatch.build.targets.sdist]
include = ["practice_kit", "tests", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
warn_unused_ignores = true
