import sys

from gojo.main import main

sys.exit(main())
