import sys

from mailverifier.cli import main

sys.exit(main())
