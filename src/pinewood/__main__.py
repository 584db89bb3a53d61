import sys

from pinewood.cli import main

sys.exit(main())
