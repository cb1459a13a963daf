from cert_issuer.adapters.inbound.cli import main

raise SystemExit(main())
