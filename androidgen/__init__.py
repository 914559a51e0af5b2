"""androidgen: the generate-sources phase of an Android build."""

from androidgen.__version__ import __version__
