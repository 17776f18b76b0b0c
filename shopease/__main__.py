from shopease.app import main

main()
