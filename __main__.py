''' MEEKLY : a meek Forth interpreter '''

import sys
from interpreter import main

# Main function calling
if __name__ == '__main__':
    sys.exit(main())
