# 数据模式包
