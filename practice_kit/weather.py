"""An HTTP service reporting a city's temperature."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from typing import Any

import requests
from flask import Flask, Response, request

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "./.apiConfig"
_API_URL = "https://api.openweathermap.org/data/2.5/weather?APPID="


@dataclass(frozen=True)
class WeatherData:
    """City name and temperature in kelvin."""

    name: str = ""
    kelvin: float = 0.0

    @classmethod
    def from_dict(cls, payload: Any) -> WeatherData:
        """Build from the weather service's JSON reply."""
        main = payload.get("main") or {} if isinstance(payload, dict) else None
        if not isinstance(main, dict):
            raise ValueError("weather data must be a JSON object")
        return cls(str(payload.get("name") or ""), float(main.get("temp") or 0.0))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "main": {"temp": self.kelvin}}


def load_api_config(filename: str) -> str:
    """Read the weather API key from a JSON config file."""
    try:
        with open(filename, encoding="utf-8") as stream:
            text = stream.read()
    except OSError as err:
        logger.error("error reading api config file: %s", err)
        raise
    try:
        config = json.loads(text)
        key = config.get("OpenWeatherMapApiKey") or "" if isinstance(config, dict) else None
        if not isinstance(key, str):
            raise ValueError("api config must be an object with a string OpenWeatherMapApiKey")
    except ValueError as err:
        logger.error("error unmarshal api config data: %s", err)
        raise
    return key


def query(city: str, config_path: str = DEFAULT_CONFIG_PATH) -> WeatherData:
    """Fetch the current weather for ``city``."""
    try:
        api_key = load_api_config(config_path)
    except (OSError, ValueError) as err:
        logger.error("error loading api config: %s", err)
        raise
    try:
        reply = requests.get(_API_URL + api_key + "&q=" + city)
    except requests.RequestException as err:
        logger.error("error getting city temperature: %s", err)
        raise
    try:
        return WeatherData.from_dict(reply.json())
    except ValueError as err:
        logger.error("error decoding weather data: %s", err)
        raise


def create_app(config_path: str = DEFAULT_CONFIG_PATH) -> Flask:
    """Build the HTTP application."""
    app = Flask(__name__)

    @app.route("/hello")
    def hello() -> Response:
        logger.info("Running hello handler...")
        return Response("Hello from go\n")

    @app.route("/weather/", defaults={"rest": ""})
    @app.route("/weather/<path:rest>")
    def city_temperature(rest: str) -> Response:
        city = request.path.split("/")[2]
        logger.info("city: %s", city)
        try:
            data = query(city, config_path)
        except (OSError, ValueError) as err:
            logger.error("error querying city temperature: %s", err)
            return Response(f"{err}\n", status=500, mimetype="text/plain")
        body = json.dumps(data.to_dict(), separators=(",", ":")) + "\n"
        return Response(body, mimetype="application/json")

    return app


def main(argv: list[str] | None = None) -> int:
    """Serve the weather tool on localhost:8080."""
    parser = argparse.ArgumentParser(description="City temperature service.")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="path of the API config file")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    logger.info("Starting weather tool...")
    create_app(args.config).run(host="localhost", port=8080)
    return 0


if __name__ == "__main__":
    sys.exit(main())