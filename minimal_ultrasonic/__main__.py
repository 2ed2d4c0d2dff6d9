from .ultra_test import main

raise SystemExit(main())
