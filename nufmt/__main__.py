from nufmt.cli import main

raise SystemExit(main())
