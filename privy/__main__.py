from privy.cli.main import main

raise SystemExit(main())
