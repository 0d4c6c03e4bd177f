import sys

from appkiller.app.main import main

sys.exit(main())
