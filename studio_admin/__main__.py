from studio_admin.launcher import main

main()
