from pathlib import Path


# 获取项目根目录（即包含 feed 和 utils 的那个目录）
BASE_DIR = Path(__file__).resolve().parents[1]

# 常用子目录路径
CONFIG_DIR = BASE_DIR / 'config'
LOG_DIR = BASE_DIR / 'log'
DATA_DIR = BASE_DIR / 'data'


# 日志文件路径
LOG_FILE = LOG_DIR / 'sys.log'

# 内置语录库
BUNDLED_QUOTES_FILE = DATA_DIR / 'quotes.json'

if __name__ == "__main__":
    print("BASE_DIR:", BASE_DIR)
    print("CONFIG_DIR:", CONFIG_DIR)
    print("LOG_DIR:", LOG_DIR)
    print("BUNDLED_QUOTES_FILE:", BUNDLED_QUOTES_FILE)
