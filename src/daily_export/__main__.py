from daily_export.cli import main

raise SystemExit(main())
