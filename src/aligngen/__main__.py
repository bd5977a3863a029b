from aligngen.cli import main

raise SystemExit(main())
