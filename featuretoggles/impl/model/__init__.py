from .entity import ModelEntity
from .toggle import ToggleDefinition, ToggleSnapshot
from .value_parsing import parse_percentage, parse_semver
