__title__ = 'argyle'
__license__ = 'MIT'
__version__ = "0.1.0"

from .argv import *
from .commandline import *
from .completion import *
from .configuration import *
from .converters import *
from .decoding import *
from .definitions import *
from .faults import *

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
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the boundary wrapper
__all__ += argv.__all__  # type: ignore[attr-defined]
# Load the exposed API of the cursor processor
__all__ += commandline.__all__  # type: ignore[attr-defined]
# Load the exposed API of the tab completion
__all__ += completion.__all__  # type: ignore[attr-defined]
# Load the exposed API of the configuration files
__all__ += configuration.__all__  # type: ignore[attr-defined]
# Load the exposed API of the converters
__all__ += converters.__all__  # type: ignore[attr-defined]
# Load the exposed API of the decoding engine
__all__ += decoding.__all__  # type: ignore[attr-defined]
# Load the exposed API of the definitions
__all__ += definitions.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
