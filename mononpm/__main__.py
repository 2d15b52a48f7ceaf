"""支持 python -m mononpm 调用"""

from mononpm.cli import main

if __name__ == "__main__":
    main()
