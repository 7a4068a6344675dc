__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'sigil'
__license__ = 'MIT'
__version__ = "0.1.0"

from .arguments import *
from .commands import *
from .completion import *
from .faults import *
from .prompts import *
from .registry import *
from .signatures import *
from . import similarity as _similarity_module
from .similarity import *
from .values import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

version_info = VersionInfo(0, 1, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the arguments
__all__ += arguments.__all__  # type: ignore[attr-defined]
# Load the exposed API of the commands
__all__ += commands.__all__  # type: ignore[attr-defined]
# Load the exposed API of the completion engine
__all__ += completion.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the prompters
__all__ += prompts.__all__  # type: ignore[attr-defined]
# Load the exposed API of the registry
__all__ += registry.__all__  # type: ignore[attr-defined]
# Load the exposed API of the signature parser
__all__ += signatures.__all__  # type: ignore[attr-defined]
# Load the exposed API of the similarity matcher (the star import shadows the
# submodule with the similarity() function of the same name)
__all__ += _similarity_module.__all__
# Load the exposed API of the value converter
__all__ += values.__all__  # type: ignore[attr-defined]
