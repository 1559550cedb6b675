from .manager import ConfigManager
from .models import ExporterConfig
