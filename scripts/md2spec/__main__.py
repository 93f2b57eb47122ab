import sys

from .md2spec import main

sys.exit(main())
