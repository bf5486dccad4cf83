"""
MCP server configuration.

Loads .mcp-toolbox/config.yaml, applies environment overrides and builds
the read-only settings handed to the image adapter.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

CONFIG_DIR = ".mcp-toolbox"
CONFIG_FILE = "config.yaml"
PID_FILE = ".mcp-server.pid"

DEFAULT_IMAGE_BASE_URL = "https://router.huggingface.co"
DEFAULT_IMAGE_PROVIDER = "hf-inference"
DEFAULT_IMAGE_MODEL = "black-forest-labs/FLUX.1-schnell"
DEFAULT_IMAGE_STEPS = 5
DEFAULT_IMAGE_TIMEOUT = 60.0


@dataclass(frozen=True)
class ImageProviderConfig:
    """
    Read-only settings for the image generation provider.

    Injected into the image adapter at construction so the adapter never
    reads process environment on its own.

    Attributes:
        api_token: Provider credential (HF_TOKEN), None when absent
        provider: Inference provider identifier
        model: Model identifier
        steps: Number of inference steps requested per image
        timeout_seconds: Upper bound on a single provider round trip
        base_url: Inference router base URL
    """

    api_token: Optional[str] = None
    provider: str = DEFAULT_IMAGE_PROVIDER
    model: str = DEFAULT_IMAGE_MODEL
    steps: int = DEFAULT_IMAGE_STEPS
    timeout_seconds: float = DEFAULT_IMAGE_TIMEOUT
    base_url: str = DEFAULT_IMAGE_BASE_URL

    @property
    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.provider}/models/{self.model}"


@dataclass
class MCPConfig:
    """
    MCP server configuration loaded from .mcp-toolbox/config.yaml.

    Attributes:
        server_name: Name advertised to MCP clients
        log_level: Logging level for the server process (default: "INFO")
        image_provider: Inference provider used by generate_image
        image_model: Model used by generate_image
        image_steps: Inference steps per generated image
        image_timeout_seconds: Bound on a single provider call
        hf_token: Provider credential (environment only, never saved)
        pid_file: Path to PID file (default: .mcp-toolbox/.mcp-server.pid)
    """

    server_name: str = "mcp-toolbox"
    log_level: str = "INFO"
    image_provider: str = DEFAULT_IMAGE_PROVIDER
    image_model: str = DEFAULT_IMAGE_MODEL
    image_steps: int = DEFAULT_IMAGE_STEPS
    image_timeout_seconds: float = DEFAULT_IMAGE_TIMEOUT
    hf_token: Optional[str] = None
    pid_file: Optional[Path] = None

    @classmethod
    def load(cls, project_path: Path) -> "MCPConfig":
        """
        Load MCP configuration from .mcp-toolbox/config.yaml.

        Falls back to defaults if file doesn't exist. Environment variables
        override config file values.

        Args:
            project_path: Path to project root (contains .mcp-toolbox/)

        Returns:
            MCPConfig instance with loaded/default values

        Raises:
            ValueError: If config file or an environment override has invalid format
        """
        config_file = project_path / CONFIG_DIR / CONFIG_FILE
        config_dict = {}

        # Load from config file if exists
        if config_file.exists():
            try:
                with open(config_file) as f:
                    config_dict = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid config.yaml: {e}") from e
            if not isinstance(config_dict, dict):
                raise ValueError("Invalid config.yaml: expected a mapping at top level")

        # Credential never comes from the config file
        config_dict.pop("hf_token", None)

        # Environment variables override config file
        if "MCP_TOOLBOX_LOG_LEVEL" in os.environ:
            config_dict["log_level"] = os.environ["MCP_TOOLBOX_LOG_LEVEL"]

        if "MCP_TOOLBOX_IMAGE_PROVIDER" in os.environ:
            config_dict["image_provider"] = os.environ["MCP_TOOLBOX_IMAGE_PROVIDER"]

        if "MCP_TOOLBOX_IMAGE_MODEL" in os.environ:
            config_dict["image_model"] = os.environ["MCP_TOOLBOX_IMAGE_MODEL"]

        if "MCP_TOOLBOX_IMAGE_STEPS" in os.environ:
            try:
                config_dict["image_steps"] = int(os.environ["MCP_TOOLBOX_IMAGE_STEPS"])
            except ValueError:
                raise ValueError(
                    f"Invalid MCP_TOOLBOX_IMAGE_STEPS: {os.environ['MCP_TOOLBOX_IMAGE_STEPS']}. "
                    "Must be an integer."
                )

        if "MCP_TOOLBOX_IMAGE_TIMEOUT" in os.environ:
            try:
                config_dict["image_timeout_seconds"] = float(os.environ["MCP_TOOLBOX_IMAGE_TIMEOUT"])
            except ValueError:
                raise ValueError(
                    f"Invalid MCP_TOOLBOX_IMAGE_TIMEOUT: {os.environ['MCP_TOOLBOX_IMAGE_TIMEOUT']}. "
                    "Must be a number of seconds."
                )

        if os.environ.get("HF_TOKEN"):
            config_dict["hf_token"] = os.environ["HF_TOKEN"]

        # Set default PID file path if not specified (a null value counts as unset)
        if config_dict.get("pid_file") is None:
            config_dict["pid_file"] = project_path / CONFIG_DIR / PID_FILE
        else:
            config_dict["pid_file"] = Path(config_dict["pid_file"])

        return cls(**{k: v for k, v in config_dict.items() if k in cls.__annotations__})

    def save(self, project_path: Path):
        """
        Save MCP configuration to .mcp-toolbox/config.yaml.

        Does NOT save hf_token (security: credentials come from env vars).

        Args:
            project_path: Path to project root (contains .mcp-toolbox/)
        """
        config_file = project_path / CONFIG_DIR / CONFIG_FILE
        config_file.parent.mkdir(parents=True, exist_ok=True)

        config_dict = {
            "server_name": self.server_name,
            "log_level": self.log_level,
            "image_provider": self.image_provider,
            "image_model": self.image_model,
            "image_steps": self.image_steps,
            "image_timeout_seconds": self.image_timeout_seconds,
            # Do NOT save hf_token (security concern)
        }

        with open(config_file, "w") as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)

    def image_provider_config(self) -> ImageProviderConfig:
        """Build the read-only provider settings injected into the image adapter."""
        return ImageProviderConfig(
            api_token=self.hf_token,
            provider=self.image_provider,
            model=self.image_model,
            steps=self.image_steps,
            timeout_seconds=self.image_timeout_seconds,
        )
