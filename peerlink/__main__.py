from .peerlink import main


main()
