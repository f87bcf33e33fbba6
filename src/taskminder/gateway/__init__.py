"""Taskminder Gateway -- 编排服务、通知管道与 HTTP 接口"""
