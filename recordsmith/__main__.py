from recordsmith.cli import main

raise SystemExit(main())
