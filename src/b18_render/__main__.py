from b18_render.cli import main

raise SystemExit(main())
